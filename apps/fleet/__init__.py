"""Fleet app package.

Read model of the physical vehicles owned by the fleet inventory service.
The reservation core only reads a vehicle's operational status and mileage
and takes short, non-blocking row claims while allocating; it never creates
or deletes vehicles.
"""
