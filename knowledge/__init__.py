"""
Sprout knowledge base.

Contains reference data and calculations for:
- WHO growth standards (0-24 months)
- Percentiles and Z-scores by the LMS method
- Percentile curves for growth charts
"""
