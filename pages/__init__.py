from pages.base_page import BasePage, StorefrontPageError
from pages.login_page import LoginPage
from pages.account_page import AccountPage
from pages.product_page import ProductPage
from pages.checkout_page import CheckoutPage
