"""
Wire models exchanged with the HTTP layer.
"""
