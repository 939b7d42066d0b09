# Schemas package init
"""
WellBloom Backend: Pydantic API Contract
=========================================

Request and response models, one module per resource group. Kept separate
from the ORM models so response shapes (joined names, computed counts) can
differ from table layout and password digests are never exposed.
"""
