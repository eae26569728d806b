"""Custom exception classes for forge-deployments library."""


class DeploymentLogError(Exception):
    """Base exception for deployment log errors."""

    pass


class ArtifactNotFoundError(DeploymentLogError, FileNotFoundError):
    """Raised when the compiled contract artifact is missing from the out directory."""

    pass


class DuplicateContractError(DeploymentLogError, ValueError):
    """Raised when an address is already registered in the deployment log."""

    def __init__(self, address: str):
        super().__init__(f"Contract {address} already found in deployment logs")
        self.address = address


class UnsupportedAbiTypeError(DeploymentLogError, TypeError):
    """Raised when a constructor argument has a type that cannot be serialized."""

    pass


class MalformedLogFileError(DeploymentLogError, ValueError):
    """Raised when a deployment log file cannot be parsed."""

    pass


class DocGeneratorMissingError(DeploymentLogError, FileNotFoundError):
    """Raised when forge-chronicles is not installed in the working directory."""

    pass


class ExplorerError(DeploymentLogError, RuntimeError):
    """Raised when the block explorer API fails or returns no usable data."""

    pass


class RpcError(DeploymentLogError, ValueError):
    """Raised when a JSON-RPC call fails or returns an error object."""

    pass


class ConstructorDecodingError(DeploymentLogError, ValueError):
    """Raised when constructor argument bytes do not match the constructor inputs."""

    pass
