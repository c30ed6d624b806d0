from dupsweep.core.models import GroupSortOrder, LargeFileSortOrder

GROUP_SORT_ALIASES = {order.value: order for order in GroupSortOrder}

GROUP_SORT_CHOICES = list(GROUP_SORT_ALIASES.keys())

GROUP_SORT_HELP_TEXT = (
    "Order of duplicate groups in the report:\n"
    "  size-desc  : Most reclaimable space first (default)\n"
    "  size-asc   : Least reclaimable space first\n"
    "  count-desc : Most copies first\n"
    "  count-asc  : Fewest copies first\n"
    "  name       : By name of the original\n"
)

LARGE_SORT_ALIASES = {order.value: order for order in LargeFileSortOrder}

LARGE_SORT_CHOICES = list(LARGE_SORT_ALIASES.keys())

PARTIAL_HASH_HELP_TEXT = (
    "Digest for the first 4 KB of each candidate:\n"
    "  sha256 : Same algorithm as the full-content check (default)\n"
    "  xxh64  : Faster pre-filter; full-content check stays SHA-256\n"
)

EPILOG_TEXT = """
Examples:
  Find duplicates in the default user folders (Desktop, Documents, Downloads, ...)
  %(prog)s duplicates

  Find duplicate photos of at least 500KB in two folders
  %(prog)s duplicates ~/Pictures ~/Downloads -m 500K -x jpg png

  Same as above + move every non-original copy to trash (with confirmation prompt)
  %(prog)s duplicates ~/Pictures ~/Downloads -m 500K -x jpg png --trash-duplicates

  List files of 1GB or more
  %(prog)s large ~ -t 1G

  Show what takes space in a folder
  %(prog)s usage ~/Documents
"""
