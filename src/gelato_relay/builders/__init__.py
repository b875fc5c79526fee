from .forward_req import ForwardRequestBuilder, SponsoredForwardRequestBuilder
from .meta_tx import (
    MetaTxRequestBuilder,
    MetaTxRequestBuilderWithSponsor,
    MetaTxRequestBuilderWithUser,
    MetaTxRequestBuilderWithUserAndSponsor,
)

__all__ = [
    "ForwardRequestBuilder",
    "SponsoredForwardRequestBuilder",
    "MetaTxRequestBuilder",
    "MetaTxRequestBuilderWithSponsor",
    "MetaTxRequestBuilderWithUser",
    "MetaTxRequestBuilderWithUserAndSponsor",
]
