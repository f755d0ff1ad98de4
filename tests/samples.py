DATABASE_TEXT = (
    "A database stores structured information for applications. "
    "Developers write queries to retrieve records from the database quickly. "
    "Caching keeps frequently used results in memory for speed."
)

API_TEXT = (
    "APIs allow different software applications to communicate. "
    "A function is a reusable block of code. "
    "Testing ensures code quality."
)

LONG_TEXT = (
    "A function is a reusable block of code that performs one task. "
    "Developers call a function whenever they need that behaviour. "
    "Testing ensures that every function returns the expected result. "
    "A database stores records so that applications can query them later. "
    "Caching keeps recent results in memory to improve performance. "
    "Security measures such as encryption protect sensitive user data. "
    "Deployment moves the application from development into production. "
    "Monitoring tells the team when the production system misbehaves."
)
