"""
Core image engine: schemas, path codec, processors and access gate.
"""
