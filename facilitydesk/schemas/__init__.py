"""
Request payload schemas (pydantic).

Services accept these models; ``validate_payload`` converts failures into
``facilitydesk.exceptions.ValidationError`` before any database call.
"""
