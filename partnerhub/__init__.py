"""
PartnerHub backend package.

Project/partner collaboration core: project health scoring and cross-entity search.
"""
