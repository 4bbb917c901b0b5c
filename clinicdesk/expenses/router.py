"""
Expense Router - API endpoints for clinic expenses.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.permissions import Module
from ..staff.dependencies import require_module
from .schemas import ExpenseCreate, ExpenseUpdate, ExpenseResponse
from . import service

router = APIRouter(dependencies=[Depends(require_module(Module.REPORTS))])

@router.get("/", response_model=Envelope[List[ExpenseResponse]])
async def list_expenses(db: Session = Depends(get_db)):
    """Get all expenses, newest first."""
    return ok(service.get_expenses(db))

@router.get("/range", response_model=Envelope[List[ExpenseResponse]])
async def list_expenses_in_range(
    start_date: Optional[str] = Query(None, description="First day, YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="Last day, YYYY-MM-DD"),
    db: Session = Depends(get_db)
):
    """Get expenses dated within a range, both ends included."""
    return ok(service.get_expenses_by_date_range(db, start_date, end_date))

@router.get("/category/{category}", response_model=Envelope[List[ExpenseResponse]])
async def list_expenses_in_category(category: str, db: Session = Depends(get_db)):
    """Get expenses in a category."""
    return ok(service.get_expenses_by_category(db, category))

@router.get("/{expense_id}", response_model=Envelope[ExpenseResponse])
async def get_expense(expense_id: str, db: Session = Depends(get_db)):
    """Get an expense by id."""
    return ok(service.get_expense(db, expense_id))

@router.post("/", response_model=Envelope[ExpenseResponse], status_code=201)
async def add_expense(expense_data: ExpenseCreate, db: Session = Depends(get_db)):
    """Record an expense."""
    return ok(service.add_expense(db, expense_data), "Expense added successfully")

@router.put("/{expense_id}", response_model=Envelope[ExpenseResponse])
async def update_expense(expense_id: str, expense_data: ExpenseUpdate, db: Session = Depends(get_db)):
    """Update an expense."""
    return ok(service.update_expense(db, expense_id, expense_data), "Expense updated successfully")

@router.delete("/{expense_id}", response_model=Envelope[str])
async def delete_expense(expense_id: str, db: Session = Depends(get_db)):
    """Delete an expense."""
    return ok(service.delete_expense(db, expense_id), "Expense deleted successfully")
