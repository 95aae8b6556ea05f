from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem
from storefront.models.order_event import OrderEvent
from storefront.models.notifications import Notification

# add ALL models here
