"""Export Terraform outputs as remote workspace variables."""

__version__ = "0.1.0"
