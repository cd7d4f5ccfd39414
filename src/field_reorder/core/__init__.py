"""
Syntax, semantics, diff and file processing infrastructure
"""
