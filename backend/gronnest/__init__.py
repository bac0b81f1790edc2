"""
Grønnest product fusion and scoring core.
"""
