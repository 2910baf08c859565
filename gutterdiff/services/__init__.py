"""
Application services: settings persistence and text file input.
"""
