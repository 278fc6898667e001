"""Application layer entry points.

Holds orchestrators and use-case services that coordinate domain logic with adapters.

Note: Services are imported directly from their modules to avoid circular imports.
Use:
    from app.application.member_search_service import MemberSearchApplicationService
    from app.application.statistics_service import StatisticsApplicationService
"""
