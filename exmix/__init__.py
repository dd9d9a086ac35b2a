"""
Exam Variant Mixer
==================
Generates randomized variants ("codes") of an ex_test LaTeX exam.

Architecture:
    - Tokenizer: Reads balanced brace groups, nesting included
    - Question Extractor: Finds ex blocks and classifies them
    - Option Parser: Splits a question around its choice command
    - Shuffler: Seedable random permutations
    - Reconstructor: Emits one section per code plus the answer appendix
    - Report Builder: Summarises warnings and per-part counts

Version: 1.0.0
"""

__version__ = "1.0.0"
