from .customer import Customer

__all_models = [Customer]
