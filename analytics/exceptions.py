###########EXTERNAL IMPORTS############

#######################################

#############LOCAL IMPORTS#############

#######################################

##########     T E L E M E T R Y     E X C E P T I O N S     ##########


class ProviderError(Exception):
    """Raised when a single telemetry provider query fails or exceeds its deadline."""

    pass


class TelemetryUnavailable(Exception):
    """Raised when a snapshot cannot be built because a provider query of the batch failed."""

    pass
