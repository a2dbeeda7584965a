"""
Command Line Interface Package.
"""
