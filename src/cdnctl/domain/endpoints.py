"""Logging endpoint catalogue.

Every logging backend shares the same five operations and differs only in
its API path and field schema, so each backend is one ``LoggingBackend``
entry rather than a hand-written command module.  Commands, services and
renderers all read from :data:`BACKENDS`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

FieldKind = Literal["str", "int", "bool"]


class EndpointField(BaseModel):
    """One configurable attribute of a logging endpoint."""

    model_config = {"frozen": True}

    key: str
    label: str
    help: str
    kind: FieldKind = "str"
    required: bool = False
    choices: tuple[str, ...] | None = None

    @property
    def flag(self) -> str:
        return "--" + self.key.replace("_", "-")


class LoggingBackend(BaseModel):
    """A logging integration exposed under ``cdnctl logging <name>``."""

    model_config = {"frozen": True}

    name: str
    label: str
    path: str
    fields: tuple[EndpointField, ...]

    @property
    def all_fields(self) -> tuple[EndpointField, ...]:
        """Backend fields followed by the fields every backend shares."""
        return self.fields + COMMON_FIELDS

    def field(self, key: str) -> EndpointField:
        for f in self.all_fields:
            if f.key == key:
                return f
        raise KeyError(key)


COMMON_FIELDS: tuple[EndpointField, ...] = (
    EndpointField(
        key="format",
        label="Format",
        help="Apache style log formatting.",
    ),
    EndpointField(
        key="format_version",
        label="Format version",
        kind="int",
        help="The version of the custom logging format used for the configured endpoint.",
    ),
    EndpointField(
        key="response_condition",
        label="Response condition",
        help="The name of an existing condition in the configured endpoint.",
    ),
    EndpointField(
        key="placement",
        label="Placement",
        help="Where in the generated VCL the logging call should be placed.",
        choices=("none", "waf_debug", "null"),
    ),
)


def _token(*, required: bool = True, help: str = "The API key for the account.") -> EndpointField:
    return EndpointField(key="token", label="Token", help=help, required=required)


def _tls_fields() -> tuple[EndpointField, ...]:
    return (
        EndpointField(
            key="tls_ca_cert",
            label="TLS CA certificate",
            help="A secure certificate to authenticate the server with. Must be in PEM format.",
        ),
        EndpointField(
            key="tls_hostname",
            label="TLS hostname",
            help="Used during the TLS handshake to validate the certificate.",
        ),
        EndpointField(
            key="tls_client_cert",
            label="TLS client certificate",
            help=(
                "The client certificate used to make authenticated requests. "
                "Must be in PEM format."
            ),
        ),
        EndpointField(
            key="tls_client_key",
            label="TLS client key",
            help=(
                "The client private key used to make authenticated requests. "
                "Must be in PEM format."
            ),
        ),
    )


_MESSAGE_TYPE = EndpointField(
    key="message_type",
    label="Message type",
    help="How the message should be formatted.",
    choices=("classic", "loggly", "logplex", "blank"),
)

_ADDRESS = EndpointField(
    key="address",
    label="Address",
    help="A hostname or IPv4 address.",
    required=True,
)


BACKENDS: dict[str, LoggingBackend] = {
    b.name: b
    for b in (
        LoggingBackend(
            name="datadog",
            label="Datadog",
            path="datadog",
            fields=(
                _token(),
                EndpointField(
                    key="region",
                    label="Region",
                    help="The region that log data will be sent to.",
                    choices=("US", "EU"),
                ),
            ),
        ),
        LoggingBackend(
            name="ftp",
            label="FTP",
            path="ftp",
            fields=(
                _ADDRESS,
                EndpointField(
                    key="port", label="Port", kind="int", help="The port number. Defaults to 21."
                ),
                EndpointField(
                    key="user",
                    label="Username",
                    help="The username for the server (can be anonymous).",
                    required=True,
                ),
                EndpointField(
                    key="password",
                    label="Password",
                    help="The password for the server (for anonymous use an email address).",
                    required=True,
                ),
                EndpointField(
                    key="public_key",
                    label="Public key",
                    help="A PGP public key that will be used to encrypt log files before writing.",
                ),
                EndpointField(
                    key="path", label="Path", help="The path to upload log files to."
                ),
                EndpointField(
                    key="period",
                    label="Period",
                    kind="int",
                    help="How frequently log files are finalized, in seconds.",
                ),
                EndpointField(
                    key="gzip_level",
                    label="GZip level",
                    kind="int",
                    help="What level of GZip encoding to have when dumping logs.",
                ),
                EndpointField(
                    key="timestamp_format",
                    label="Timestamp format",
                    help="strftime specified timestamp formatting.",
                ),
                EndpointField(
                    key="compression_codec",
                    label="Compression codec",
                    help="The codec used for compression of your logs.",
                    choices=("zstd", "snappy", "gzip"),
                ),
            ),
        ),
        LoggingBackend(
            name="loggly",
            label="Loggly",
            path="loggly",
            fields=(_token(help="The token to use for authentication."),),
        ),
        LoggingBackend(
            name="splunk",
            label="Splunk",
            path="splunk",
            fields=(
                EndpointField(
                    key="url",
                    label="URL",
                    help="The URL to POST to.",
                    required=True,
                ),
                _token(required=False, help="A Splunk token for use in posting logs."),
                *_tls_fields(),
            ),
        ),
        LoggingBackend(
            name="papertrail",
            label="Papertrail",
            path="papertrail",
            fields=(
                _ADDRESS,
                EndpointField(key="port", label="Port", kind="int", help="The port number."),
            ),
        ),
        LoggingBackend(
            name="sumologic",
            label="Sumologic",
            path="sumologic",
            fields=(
                EndpointField(
                    key="url", label="URL", help="The URL to POST to.", required=True
                ),
                _MESSAGE_TYPE,
            ),
        ),
        LoggingBackend(
            name="syslog",
            label="Syslog",
            path="syslog",
            fields=(
                _ADDRESS,
                EndpointField(
                    key="port", label="Port", kind="int", help="The port number. Defaults to 514."
                ),
                EndpointField(
                    key="use_tls",
                    label="Use TLS",
                    kind="bool",
                    help="Whether to use TLS for secure logging.",
                ),
                _token(
                    required=False,
                    help="Whether to prepend each message with a specific token.",
                ),
                _MESSAGE_TYPE,
                *_tls_fields(),
            ),
        ),
        LoggingBackend(
            name="newrelic",
            label="New Relic",
            path="newrelic",
            fields=(
                _token(help="The Insert API key from the Account page of your New Relic account."),
                EndpointField(
                    key="region",
                    label="Region",
                    help="The region to which to stream logs.",
                    choices=("US", "EU"),
                ),
            ),
        ),
        LoggingBackend(
            name="https",
            label="HTTPS",
            path="https",
            fields=(
                EndpointField(
                    key="url", label="URL", help="URL that log data will be sent to.", required=True
                ),
                EndpointField(
                    key="method",
                    label="Method",
                    help="HTTP method used for request.",
                    choices=("POST", "PUT"),
                ),
                EndpointField(
                    key="content_type",
                    label="Content type",
                    help="Content type of the header sent with the request.",
                ),
                EndpointField(
                    key="header_name",
                    label="Header name",
                    help="Name of the custom header sent with the request.",
                ),
                EndpointField(
                    key="header_value",
                    label="Header value",
                    help="Value of the custom header sent with the request.",
                ),
                EndpointField(
                    key="json_format",
                    label="JSON format",
                    help="Enforces valid JSON formatting for log entries.",
                    choices=("0", "1", "2"),
                ),
                _MESSAGE_TYPE,
                EndpointField(
                    key="request_max_entries",
                    label="Request max entries",
                    kind="int",
                    help="Maximum number of logs to append to a batch, if non-zero.",
                ),
                EndpointField(
                    key="request_max_bytes",
                    label="Request max bytes",
                    kind="int",
                    help="Maximum size of log batch, if non-zero.",
                ),
                *_tls_fields(),
            ),
        ),
    )
}


def get_backend(name: str) -> LoggingBackend:
    """Look up a backend by name, raising KeyError for unknown names."""
    return BACKENDS[name]
