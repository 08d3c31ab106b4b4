"""
Core module: configuration, logging and the tree engine contract
"""
