"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
├── auth.py           # login, current profile
├── reports.py        # daily report CRUD + review
├── comments.py       # report comments
├── sales_persons.py  # sales person master data
├── customers.py      # customer master data
└── results.py        # Result / UseCaseError contract

Usage
-----
    from daily_report.application.usecases import CreateReportUseCase
"""

from .auth import GetProfileUseCase, LoginOutcome, LoginUseCase
from .comments import (
    DeleteCommentUseCase,
    ListCommentsUseCase,
    PostCommentUseCase,
    UpdateCommentUseCase,
)
from .customers import (
    CreateCustomerUseCase,
    CustomerChanges,
    DeactivateCustomerUseCase,
    GetCustomerUseCase,
    ListCustomersUseCase,
    NewCustomer,
    UpdateCustomerUseCase,
)
from .reports import (
    CreateReportUseCase,
    DeleteReportUseCase,
    GetReportUseCase,
    ListReportsUseCase,
    ReportInput,
    ReportPatch,
    ReviewReportUseCase,
    UpdateReportUseCase,
)
from .results import Result, UseCaseError, UseCaseErrorCode
from .sales_persons import (
    CreateSalesPersonUseCase,
    DeactivateSalesPersonUseCase,
    GetSalesPersonUseCase,
    ListSalesPersonsUseCase,
    NewSalesPerson,
    SalesPersonChanges,
    SalesPersonDetail,
    UpdateSalesPersonUseCase,
)

__all__ = [
    # Auth
    "LoginUseCase",
    "LoginOutcome",
    "GetProfileUseCase",
    # Reports
    "ListReportsUseCase",
    "GetReportUseCase",
    "CreateReportUseCase",
    "UpdateReportUseCase",
    "DeleteReportUseCase",
    "ReviewReportUseCase",
    "ReportInput",
    "ReportPatch",
    # Comments
    "ListCommentsUseCase",
    "PostCommentUseCase",
    "UpdateCommentUseCase",
    "DeleteCommentUseCase",
    # Sales persons
    "ListSalesPersonsUseCase",
    "GetSalesPersonUseCase",
    "CreateSalesPersonUseCase",
    "UpdateSalesPersonUseCase",
    "DeactivateSalesPersonUseCase",
    "NewSalesPerson",
    "SalesPersonChanges",
    "SalesPersonDetail",
    # Customers
    "ListCustomersUseCase",
    "GetCustomerUseCase",
    "CreateCustomerUseCase",
    "UpdateCustomerUseCase",
    "DeactivateCustomerUseCase",
    "NewCustomer",
    "CustomerChanges",
    # Results
    "Result",
    "UseCaseError",
    "UseCaseErrorCode",
]
