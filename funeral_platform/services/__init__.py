"""
Domain services over the JSON document store
"""
