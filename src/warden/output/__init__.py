"""Rich rendering for the ``list`` and ``show`` commands."""
