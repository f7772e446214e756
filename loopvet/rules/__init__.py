"""Rule packages, one sub-package per analyzed language."""
