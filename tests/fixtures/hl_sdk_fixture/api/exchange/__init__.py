from ._methods.cancel import CancelExchangeRequest, CancelExchangeResponse
from ._methods.order import OrderRequest, OrderSuccessResponse

OrderResponse = OrderSuccessResponse
