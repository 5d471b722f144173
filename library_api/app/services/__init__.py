"""
Service layer.

Each service encapsulates the business logic for one domain and owns
its transaction boundaries: a service method opens one unit of work,
drives the repositories through it and commits or rolls back as a
whole.  API handlers only call services.
"""
