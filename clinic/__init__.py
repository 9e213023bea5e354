"""CarePoint clinic application.

Models, serializers, services and views for staff scheduling,
appointment booking, payments, coverage and diagnosis records.
"""
