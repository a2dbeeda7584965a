"""
Utilities Package.

Console/logging setup and the tree printer used by the debug inspector.
"""
