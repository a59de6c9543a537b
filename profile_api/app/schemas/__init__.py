"""
Pydantic schema definitions for API payloads.

Each sub-resource of a profile (events, milestones, testimonials)
defines its own models for request and response bodies.  Field
aliases match the camelCase keys persisted in the profile document.
"""
