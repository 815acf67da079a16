from flask import current_app
from sqlalchemy import or_
from ..errors import ApiError
from ..models import Budget, Category
from .reconciliation import reconcile_budget


def rename_section(budget: Budget, old_name, new_name):
    """Rename a section and re-point its categories.

    Returns ``(budget, updated_count)``; the caller commits.
    """
    if not old_name or not new_name:
        raise ApiError("Missing required fields: oldSectionName, newSectionName")
    if budget.find_section(new_name):
        raise ApiError("A section with this name already exists")

    # An unknown old name leaves the sections as they are; matching
    # categories are still moved
    legacy_name = old_name
    section = budget.find_section(old_name)
    if section is not None:
        # Older categories stored the display form of the section
        legacy_name = section.display_name
        section.name = new_name
        section.display_name = new_name

    owned = Category.query.filter(
        or_(Category.budget_id == budget.id, Category.budget_id.is_(None))
    )
    categories = owned.filter(Category.section_id == old_name).all()
    if not categories and legacy_name != old_name:
        categories = owned.filter(Category.section_id == legacy_name).all()

    for category in categories:
        category.section_id = new_name
        category.budget_id = budget.id

    reconcile_budget(budget)
    current_app.logger.info(
        "Renamed section %r to %r on budget %s (%d categories)",
        old_name, new_name, budget.id, len(categories),
    )
    return budget, len(categories)
