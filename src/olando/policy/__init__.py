"""Protocol constants and deployment configuration."""

from olando.policy.params import DeploymentConfig

__all__ = ["DeploymentConfig"]
