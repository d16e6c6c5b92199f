"""Platform transports. Pure I/O, no relay logic."""
