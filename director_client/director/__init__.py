"""
Director request mediation: synchronous requests, task following,
response translation and the context-aware façade.
"""
