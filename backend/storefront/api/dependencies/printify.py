from storefront.integrations.printify.client import PrintifyClient, PrintifyClientProtocol


def get_printify_client() -> PrintifyClientProtocol:
    return PrintifyClient()
