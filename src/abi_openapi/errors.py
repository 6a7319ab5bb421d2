"""Exception hierarchy for abi-openapi.

Library code raises these; only the CLI turns them into messages and
exit codes. Unrecognized Solidity types are never errors, they are
reported as diagnostics next to the generated schema.
"""


class AbiOpenApiError(Exception):
    """Base class for all abi-openapi failures."""


class InputAbsentError(AbiOpenApiError):
    """The ABI is empty or declares no callable functions."""


class PathCollisionError(AbiOpenApiError):
    """Two functions resolve to the same path and HTTP verb."""

    def __init__(self, path: str, verb: str, signatures: list[str]):
        self.path = path
        self.verb = verb
        self.signatures = signatures
        joined = ", ".join(signatures)
        super().__init__(f"{verb.upper()} {path} is claimed by overloaded functions: {joined}")


class TypeDepthError(AbiOpenApiError):
    """A type nests deeper than the configured recursion limit."""


class ArtifactError(AbiOpenApiError):
    """An artifact or ABI file could not be read."""


class ArtifactNotFoundError(ArtifactError):
    """No compiled artifact exists for the requested contract."""


class ConfigError(AbiOpenApiError):
    """The configuration file is unreadable or invalid."""
