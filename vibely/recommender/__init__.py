"""Recommendation core for Vibely.

Contains the geo-proximity filter, the rule-based fallback scorer, ranking,
and the pluggable recommendation engines with their startup selector.
"""
