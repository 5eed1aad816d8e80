# import every model so SQLAlchemy registers it in Base.metadata

from storefront.data.models.product import ProductModel
from storefront.data.models.banner import BannerModel
from storefront.data.models.profile import ProfileModel
from storefront.data.models.address import AddressModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel

__all__ = [
    "ProductModel",
    "BannerModel",
    "ProfileModel",
    "AddressModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
