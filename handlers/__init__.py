"""
Domain handlers for Scryfall Sheets.
Each package provides a handler class that operates on Google Sheets directly.
"""
