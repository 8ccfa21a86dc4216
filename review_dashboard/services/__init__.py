"""
Domain services for review moderation, statistics and property pages
"""
