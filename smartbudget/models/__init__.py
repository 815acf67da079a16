from .user import User
from .budget import Budget, BudgetSection
from .category import Category
from .expense import Expense
from .monthly_budget import MonthlyBudget
from .feature import Feature

__all__ = ["User", "Budget", "BudgetSection", "Category", "Expense", "MonthlyBudget", "Feature"]
