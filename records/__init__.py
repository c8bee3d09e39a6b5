"""Patient records application for the dental clinic.

This package contains the patient document model, the record store and
service layer, input serializers, and the HTTP views exposing them.
"""
