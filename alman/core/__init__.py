"""
alman.core

The engine behind alman.
Contains:
 - CommandEntry and its frecency score
 - FrecencyStore / TombstoneSet (ranked command store)
 - command ingestion (prefix expansion)
 - alias candidate generators and the AliasSuggester ranking them
 - alias lifecycle operations and the shared AppState
"""
