from aftermarket.models.after_market import AfterMarketPriceData, AfterMarketRecord

__all__ = ["AfterMarketPriceData", "AfterMarketRecord"]
