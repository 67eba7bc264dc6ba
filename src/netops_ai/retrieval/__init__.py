"""Relevance matching and prompt context"""
