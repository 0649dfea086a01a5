"""Package listing and vanity import extraction."""

from .models import PackageListing, VanityImport, import_prefix
from .packages import GoListLister, PackageLister, parse_listing
from .vanity import ExtractionResult, VanityExtractor, collect_imports

__all__ = [
    "PackageListing",
    "VanityImport",
    "import_prefix",
    "GoListLister",
    "PackageLister",
    "parse_listing",
    "ExtractionResult",
    "VanityExtractor",
    "collect_imports",
]
