"""
Expense Service - Business logic for clinic expenses.
"""
from typing import List, Optional, Union
from datetime import date
from sqlalchemy import func
from sqlalchemy.orm import Session
import logging

from ..exceptions import ValidationFailedException, RecordNotFoundException
from ..core.dates import clinic_today, parse_date
from ..core.records import build_record, apply_payload, commit_or_raise, utcnow
from .models import Expense
from .schemas import ExpenseCreate, ExpenseUpdate

# Set up logging
logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "amount", "category")

def _newest_first(query):
    return query.order_by(Expense.date.desc(), Expense.created_at.desc())

def get_expense(db: Session, expense_id: str) -> Expense:
    """
    Get an expense by id.

    Raises:
        RecordNotFoundException: If the expense does not exist
    """
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise RecordNotFoundException(f"Expense with ID {expense_id} not found")
    return expense

def get_expenses(db: Session) -> List[Expense]:
    """All expenses, newest date first."""
    return _newest_first(db.query(Expense)).all()

def get_expenses_by_date_range(
    db: Session,
    start_date: Union[str, date, None],
    end_date: Union[str, date, None]
) -> List[Expense]:
    """
    Expenses dated within an inclusive range.

    Args:
        db: Database session
        start_date: First day, date or YYYY-MM-DD string
        end_date: Last day, date or YYYY-MM-DD string

    Returns:
        List of expenses, newest first

    Raises:
        ValidationFailedException: If a date is missing or malformed, or start is after end
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start > end:
        raise ValidationFailedException("Start date must be on or before end date")
    return _newest_first(
        db.query(Expense).filter(Expense.date >= start, Expense.date <= end)
    ).all()

def get_expenses_by_category(db: Session, category: Optional[str]) -> List[Expense]:
    """Expenses in a category, matched ignoring case."""
    category = (category or "").strip()
    if not category:
        raise ValidationFailedException("Category is required")
    return _newest_first(
        db.query(Expense).filter(func.lower(Expense.category) == category.lower())
    ).all()

def add_expense(db: Session, expense_data: ExpenseCreate) -> Expense:
    """
    Record an expense. The date defaults to today.

    Args:
        db: Database session
        expense_data: Title, amount and category are required

    Returns:
        Expense: The stored expense

    Raises:
        ValidationFailedException: If a required field is missing
    """
    payload = expense_data.model_dump(exclude_unset=True)
    missing = [field for field in REQUIRED_FIELDS if payload.get(field) in (None, "")]
    if missing:
        raise ValidationFailedException(f"Missing required expense information: {', '.join(missing)}")
    payload["title"] = payload["title"].strip()
    payload["category"] = payload["category"].strip()
    if not payload.get("date"):
        payload["date"] = clinic_today()

    expense = build_record(Expense, payload)
    db.add(expense)
    commit_or_raise(db, "add expense", expense)
    logger.info(f"Expense {expense.id} recorded: {expense.category} {expense.amount}")
    return expense

def update_expense(db: Session, expense_id: Optional[str], expense_data: ExpenseUpdate) -> Expense:
    """
    Update an expense. Only fields that were sent are changed.

    Raises:
        ValidationFailedException: If no id was given or a required field is blanked
        RecordNotFoundException: If the expense does not exist
    """
    if not expense_id:
        raise ValidationFailedException("Expense ID is required for update")
    expense = get_expense(db, expense_id)
    payload = expense_data.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in payload and payload[field] in (None, ""):
            raise ValidationFailedException(f"{field.capitalize()} cannot be empty")

    apply_payload(expense, payload)
    expense.updated_at = utcnow()
    commit_or_raise(db, "update expense", expense)
    logger.info(f"Expense {expense_id} updated")
    return expense

def delete_expense(db: Session, expense_id: str) -> str:
    """
    Delete an expense.

    Raises:
        RecordNotFoundException: If the expense does not exist
    """
    expense = get_expense(db, expense_id)
    db.delete(expense)
    commit_or_raise(db, "delete expense")
    logger.info(f"Expense {expense_id} deleted")
    return expense_id
