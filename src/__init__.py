"""
Sprout - WHO growth percentiles and growth velocity.
"""
