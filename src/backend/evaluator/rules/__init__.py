from .project_files import LicenseFilePresentRule, ReadmePresentRule

__all__ = [
    "LicenseFilePresentRule",
    "ReadmePresentRule",
]
