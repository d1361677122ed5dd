from reduct_kernels.logging.logging import (
    ReductJSONFormatter,
    RotatingFileHandlerWithDir,
    setup_logging,
)

__all__ = ["setup_logging", "ReductJSONFormatter", "RotatingFileHandlerWithDir"]
