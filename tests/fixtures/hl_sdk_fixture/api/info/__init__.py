from ._methods.allMids import AllMidsRequest, AllMidsResponse
from ._methods.meta import MetaRequest, MetaResponse, UniverseAsset
