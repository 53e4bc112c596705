"""
Request controllers for the videousers service.

Controllers validate request data, call the services, and translate service
errors into HTTP exceptions. They know nothing about Flask routing or
cookies; see :mod:`videousers.routes`.
"""
