"""
Data layer: chain models, validators and the JSON codec.
"""
