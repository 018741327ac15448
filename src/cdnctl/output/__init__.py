"""Output layer — renders ServiceResult as text, tables, or JSON."""
