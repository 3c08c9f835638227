"""Fixed catalog of sample records loaded by the admin seeding action.

The base catalog is the documented sample set. The extended catalog adds the
mid and late 2025 records and is only loaded on request.
"""
from __future__ import annotations

from typing import Any

Catalog = dict[str, list[dict[str, Any]]]

BASE_CATALOG: Catalog = {
    "sales": [
        {"date": "2025-01-15", "description": "Enterprise Software License", "cost": 2500000, "sellingPrice": 4500000, "expenses": 350000},
        {"date": "2025-01-20", "description": "Mobile App Development", "cost": 1800000, "sellingPrice": 3500000, "expenses": 280000},
        {"date": "2025-02-05", "description": "E-commerce Platform", "cost": 3200000, "sellingPrice": 6500000, "expenses": 520000},
        {"date": "2025-02-12", "description": "Digital Marketing Campaign", "cost": 850000, "sellingPrice": 1500000, "expenses": 120000},
        {"date": "2025-02-18", "description": "Cloud Infrastructure Setup", "cost": 1200000, "sellingPrice": 2200000, "expenses": 180000},
    ],
    "expenses": [
        {"date": "2025-01-08", "category": "Office Equipment", "description": "MacBook Pro", "vendor": "Apple Store", "amount": 280000, "status": "paid"},
        {"date": "2025-01-12", "category": "Software Licenses", "description": "Adobe Creative Suite", "vendor": "Adobe Inc", "amount": 120000, "status": "paid"},
        {"date": "2025-01-18", "category": "Marketing", "description": "Google Ads Campaign", "vendor": "Google LLC", "amount": 350000, "status": "unpaid"},
        {"date": "2025-02-02", "category": "Office Rent", "description": "Monthly office rent", "vendor": "Property Management Co", "amount": 450000, "status": "paid"},
    ],
    "liabilities": [
        {"lenderParty": "First National Bank", "liabilityType": "Business Loan", "startDate": "2025-01-15", "dueDate": "2026-01-15", "originalAmount": 5000000, "description": "Business expansion loan"},
        {"lenderParty": "Equipment Finance Corp", "liabilityType": "Equipment Loan", "startDate": "2025-02-20", "dueDate": "2026-02-20", "originalAmount": 2500000, "description": "Equipment financing"},
    ],
    "salaries": [
        {"employeeName": "John Smith", "role": "Senior Developer", "netSalary": 885000, "month": "2025-01", "paymentDate": "2025-01-31", "paymentStatus": "paid"},
        {"employeeName": "Sarah Johnson", "role": "UI/UX Designer", "netSalary": 665000, "month": "2025-01", "paymentDate": "2025-01-31", "paymentStatus": "paid"},
        {"employeeName": "Ahmed Al-Rashid", "role": "Project Manager", "netSalary": 802000, "month": "2025-02", "paymentDate": "2025-02-28", "paymentStatus": "pending"},
    ],
    "bankPdc": [
        {"date": "2025-03-15", "bank": "Emirates NBD", "chequeNumber": "CHQ001234", "code": "PDC-001", "supplier": "Tech Solutions LLC", "description": "Software development", "amount": 1500000, "status": "pending"},
        {"date": "2025-04-20", "bank": "First Abu Dhabi Bank", "chequeNumber": "CHQ001235", "code": "PDC-002", "supplier": "Office Furniture Co", "description": "Office furniture", "amount": 850000, "status": "pending"},
    ],
    "futureNeeds": [
        {"month": "2025-03", "description": "New Server Hardware", "quantity": 2, "amount": 550000, "status": "one-time"},
        {"month": "2025-04", "description": "Office Expansion", "quantity": 5, "amount": 120000, "status": "one-time"},
        {"month": "2025-03", "description": "Monthly Cloud Hosting", "quantity": 1, "amount": 85000, "status": "recurring"},
    ],
    "businessInHand": [
        {"type": "po_in_hand", "description": "Enterprise CRM System", "amount": 8500000, "expectedDate": "2025-04-15", "status": "confirmed"},
        {"type": "pending_invoice", "description": "Website Redesign", "amount": 1200000, "expectedDate": "2025-03-10", "status": "pending"},
        {"type": "expected_revenue", "description": "Mobile App Contract", "amount": 2500000, "expectedDate": "2025-05-20", "status": "confirmed"},
    ],
    "cashflow": [
        {"date": "2025-01-15", "type": "inflow", "category": "sales", "description": "Sale receipt: Enterprise Software License", "amount": 4500000},
        {"date": "2025-01-31", "type": "outflow", "category": "salaries", "description": "Salary payments January", "amount": 1550000},
        {"date": "2025-02-02", "type": "outflow", "category": "expenses", "description": "Expense payment: Monthly office rent", "amount": 450000},
    ],
}

EXTENDED_CATALOG: Catalog = {
    "sales": [
        {"date": "2025-06-10", "description": "AI Chatbot System", "cost": 1500000, "sellingPrice": 2800000, "expenses": 220000},
        {"date": "2025-06-15", "description": "Data Analytics Platform", "cost": 2200000, "sellingPrice": 4200000, "expenses": 350000},
        {"date": "2025-06-20", "description": "Blockchain Development", "cost": 3500000, "sellingPrice": 7500000, "expenses": 600000},
        {"date": "2025-08-05", "description": "VR Training Software", "cost": 2800000, "sellingPrice": 5500000, "expenses": 450000},
        {"date": "2025-08-12", "description": "API Integration Service", "cost": 950000, "sellingPrice": 1800000, "expenses": 150000},
        {"date": "2025-08-18", "description": "DevOps Automation Setup", "cost": 1400000, "sellingPrice": 2600000, "expenses": 200000},
        {"date": "2025-10-08", "description": "Cybersecurity Audit", "cost": 800000, "sellingPrice": 1500000, "expenses": 100000},
        {"date": "2025-10-14", "description": "Performance Optimization", "cost": 1200000, "sellingPrice": 2300000, "expenses": 180000},
        {"date": "2025-10-20", "description": "Legacy System Migration", "cost": 2500000, "sellingPrice": 4800000, "expenses": 400000},
    ],
    "expenses": [
        {"date": "2025-06-05", "category": "Office Equipment", "description": "Gaming PC Setup", "vendor": "TechPro Solutions", "amount": 420000, "status": "paid"},
        {"date": "2025-06-12", "category": "Software Licenses", "description": "Microsoft Office 365", "vendor": "Microsoft Corp", "amount": 95000, "status": "paid"},
        {"date": "2025-06-18", "category": "Marketing", "description": "Social Media Campaign", "vendor": "Digital Agency Pro", "amount": 280000, "status": "unpaid"},
        {"date": "2025-08-03", "category": "Office Equipment", "description": "Wireless Headsets", "vendor": "AudioTech Ltd", "amount": 155000, "status": "paid"},
        {"date": "2025-08-10", "category": "Software Licenses", "description": "VS Code Pro Licenses", "vendor": "Microsoft Corp", "amount": 75000, "status": "paid"},
        {"date": "2025-08-15", "category": "Marketing", "description": "SEO Optimization", "vendor": "SEO Masters Inc", "amount": 320000, "status": "unpaid"},
        {"date": "2025-10-02", "category": "Office Equipment", "description": "Standing Desk", "vendor": "Ergonomic Solutions", "amount": 89000, "status": "paid"},
        {"date": "2025-10-08", "category": "Software Licenses", "description": "Figma Teams", "vendor": "Figma Inc", "amount": 65000, "status": "paid"},
        {"date": "2025-10-20", "category": "Marketing", "description": "LinkedIn Ads Campaign", "vendor": "LinkedIn Business", "amount": 400000, "status": "unpaid"},
    ],
    "liabilities": [
        {"lenderParty": "Tech Investment Bank", "liabilityType": "Software License Loan", "startDate": "2025-06-10", "dueDate": "2026-06-10", "originalAmount": 3200000, "description": "AI development funding"},
        {"lenderParty": "Digital Solutions Finance", "liabilityType": "Office Renovation Loan", "startDate": "2025-08-05", "dueDate": "2026-08-05", "originalAmount": 1500000, "description": "Workspace modernization"},
        {"lenderParty": "Innovation Capital", "liabilityType": "R&D Loan", "startDate": "2025-10-15", "dueDate": "2026-10-15", "originalAmount": 2800000, "description": "Research and development"},
    ],
    "salaries": [
        {"employeeName": "Maria Rodriguez", "role": "AI Engineer", "netSalary": 950000, "month": "2025-06", "paymentDate": "2025-06-30", "paymentStatus": "paid"},
        {"employeeName": "David Chen", "role": "DevOps Engineer", "netSalary": 780000, "month": "2025-08", "paymentDate": "2025-08-31", "paymentStatus": "pending"},
        {"employeeName": "Lisa Wang", "role": "Data Scientist", "netSalary": 920000, "month": "2025-10", "paymentDate": "2025-10-31", "paymentStatus": "paid"},
    ],
    "bankPdc": [
        {"date": "2025-06-12", "bank": "Commercial Bank UAE", "chequeNumber": "CHQ001236", "code": "PDC-003", "supplier": "AI Tech Partners", "description": "AI model development", "amount": 2200000, "status": "pending"},
        {"date": "2025-08-08", "bank": "Standard Chartered", "chequeNumber": "CHQ001237", "code": "PDC-004", "supplier": "Cloud Infrastructure Ltd", "description": "Server upgrade", "amount": 1800000, "status": "cleared"},
        {"date": "2025-10-10", "bank": "HSBC Middle East", "chequeNumber": "CHQ001238", "code": "PDC-005", "supplier": "Security Solutions Pro", "description": "Network security", "amount": 950000, "status": "pending"},
    ],
    "futureNeeds": [
        {"month": "2025-06", "description": "AI Training GPUs", "quantity": 4, "amount": 1200000, "status": "one-time"},
        {"month": "2025-08", "description": "Office Renovation Phase 2", "quantity": 1, "amount": 2500000, "status": "one-time"},
        {"month": "2025-10", "description": "Advanced Analytics Tools", "quantity": 1, "amount": 150000, "status": "recurring"},
    ],
    "businessInHand": [
        {"type": "po_in_hand", "description": "AI Implementation Project", "amount": 5200000, "expectedDate": "2025-06-25", "status": "confirmed"},
        {"type": "pending_invoice", "description": "Blockchain Integration", "amount": 3800000, "expectedDate": "2025-08-30", "status": "pending"},
        {"type": "expected_revenue", "description": "Cybersecurity Consulting", "amount": 1800000, "expectedDate": "2025-10-15", "status": "confirmed"},
    ],
    "cashflow": [
        {"date": "2025-08-08", "type": "outflow", "category": "bank_pdc", "description": "PDC cleared: Server upgrade", "amount": 1800000},
    ],
}


def sample_catalog(extended: bool = False) -> Catalog:
    """Return the records to seed, per module."""

    catalog = {module_id: list(samples) for module_id, samples in BASE_CATALOG.items()}
    if extended:
        for module_id, samples in EXTENDED_CATALOG.items():
            catalog.setdefault(module_id, []).extend(samples)
    return catalog
