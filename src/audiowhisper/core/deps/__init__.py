"""Local runtime provisioning for on-device engines."""

from .runtime_provisioner import (
    RuntimeProvisioningError,
    UvRuntimeProvisioner,
)

__all__ = ["RuntimeProvisioningError", "UvRuntimeProvisioner"]
