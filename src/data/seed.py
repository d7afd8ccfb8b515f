"""Sample records served by the mock data source."""

SEED_TASKS: list[dict] = [
    {
        "id": 1,
        "title": "Prepare Report",
        "description": "Compile the monthly financial report.",
        "case": 1,
        "case_number": "CASE-001",
        "matter": 1,
        "created_at": "2024-06-01T09:00:00Z",
        "due_date": "2024-06-10T17:00:00Z",
        "assigned_to": 1,
        "assignee_name": "Alice Smith",
        "status": "In Progress",
        "priority": "High",
        "is_new": True,
    },
    {
        "id": 2,
        "title": "Client Meeting",
        "description": "Meet with client to discuss project scope.",
        "case": 2,
        "case_number": "CASE-002",
        "matter": 2,
        "created_at": "2024-06-02T10:30:00Z",
        "due_date": "2024-06-12T15:00:00Z",
        "assigned_to": 2,
        "assignee_name": "Bob Johnson",
        "status": "Due",
        "priority": "Medium",
        "is_new": False,
    },
    {
        "id": 3,
        "title": "Review Contract",
        "description": "Review the new vendor contract for approval.",
        "case": 3,
        "case_number": "CASE-003",
        "matter": 3,
        "created_at": "2024-06-03T14:00:00Z",
        "due_date": "2024-06-15T12:00:00Z",
        "assigned_to": 3,
        "assignee_name": "Charlie Lee",
        "status": "Done",
        "priority": "Low",
        "is_new": False,
    },
    {
        "id": 4,
        "title": "Draft Proposal",
        "description": "Draft the initial project proposal.",
        "case_number": "CASE-004",
        "created_at": "2024-06-04T09:00:00Z",
        "due_date": "2024-06-16T17:00:00Z",
        "assigned_to": 4,
        "assignee_name": "Dana White",
        "status": "Due",
        "priority": "Medium",
        "is_new": True,
    },
    {
        "id": 5,
        "title": "Legal Review",
        "description": "Conduct legal review of documents.",
        "case_number": "CASE-005",
        "created_at": "2024-06-05T11:00:00Z",
        "due_date": "2024-06-18T15:00:00Z",
        "assigned_to": 5,
        "assignee_name": "Eve Black",
        "status": "In Progress",
        "priority": "High",
        "is_new": False,
    },
    {
        "id": 6,
        "title": "Team Meeting",
        "description": "Weekly team sync-up.",
        "case_number": "CASE-006",
        "created_at": "2024-06-06T13:00:00Z",
        "due_date": "2024-06-20T10:00:00Z",
        "assigned_to": 6,
        "assignee_name": "Frank Green",
        "status": "Done",
        "priority": "Low",
        "is_new": False,
    },
    {
        "id": 7,
        "title": "Budget Planning",
        "description": "Plan the budget for Q3.",
        "case_number": "CASE-007",
        "created_at": "2024-06-07T15:00:00Z",
        "due_date": "2024-06-22T12:00:00Z",
        "assigned_to": 7,
        "assignee_name": "Grace Hopper",
        "status": "Over Due",
        "priority": "High",
        "is_new": True,
    },
    {
        "id": 8,
        "title": "Client Feedback",
        "description": "Collect feedback from client.",
        "case_number": "CASE-008",
        "created_at": "2024-06-08T10:00:00Z",
        "due_date": "2024-06-24T16:00:00Z",
        "assigned_to": 8,
        "assignee_name": "Henry Ford",
        "status": "Due",
        "priority": "Medium",
        "is_new": False,
    },
    {
        "id": 9,
        "title": "Test New Badge",
        "description": "This task should show a New badge until viewed.",
        "case_number": "CASE-009",
        "created_at": "2024-06-09T10:00:00Z",
        "due_date": "2024-06-30T16:00:00Z",
        "assigned_to": 9,
        "assignee_name": "Test User",
        "status": "Due",
        "priority": "Low",
        "is_new": True,
    },
]

SEED_CASES: list[dict] = [
    {
        "id": 1,
        "case_number": "CASE-001",
        "matter": 1,
        "coming_up": "Hearing on 2024-06-20",
        "opened": "2024-05-01T09:00:00Z",
        "last_updated": "2024-06-05T10:00:00Z",
        "lawyer": "Alice Smith",
        "client": "Acme Corp",
        "case_documents": 3,
    },
    {
        "id": 2,
        "case_number": "CASE-002",
        "matter": 2,
        "coming_up": "Filing Deadline 2024-06-18",
        "opened": "2024-05-10T11:30:00Z",
        "last_updated": "2024-06-07T14:00:00Z",
        "lawyer": "Bob Johnson",
        "client": "Beta LLC",
        "case_documents": 5,
    },
    {
        "id": 3,
        "case_number": "CASE-003",
        "matter": 3,
        "coming_up": "Settlement Meeting 2024-06-25",
        "opened": "2024-05-15T13:00:00Z",
        "last_updated": "2024-06-09T16:00:00Z",
        "lawyer": "Charlie Lee",
        "client": "Gamma Inc",
        "case_documents": 2,
    },
]

SEED_MATTERS: list[dict] = [
    {"id": 1, "title": "Contract Dispute"},
    {"id": 2, "title": "Intellectual Property"},
    {"id": 3, "title": "Employment Law"},
]

SEED_EMPLOYEES: list[dict] = [
    {"id": 1, "full_name": "Alice Smith"},
    {"id": 2, "full_name": "Bob Johnson"},
    {"id": 3, "full_name": "Charlie Lee"},
    {"id": 4, "full_name": "Dana White"},
    {"id": 5, "full_name": "Eve Black"},
    {"id": 6, "full_name": "Frank Green"},
    {"id": 7, "full_name": "Grace Hopper"},
    {"id": 8, "full_name": "Henry Ford"},
    {"id": 9, "full_name": "Test User"},
]
