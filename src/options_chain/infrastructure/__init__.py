"""
Infrastructure layer: error handling and logging.
"""
