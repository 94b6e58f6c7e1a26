"""Pattern filters: one module per violation category.

Each filter exposes pure ``detect_*`` and ``censor_*`` functions over plain
strings and shares no state with the others, except the profanity lexicon,
which is process-wide.
"""
