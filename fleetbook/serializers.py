def vehicle_to_dict(vehicle):
    return {
        "id": vehicle.id,
        "vehicle_type": vehicle.vehicle_type,
        "is_available": vehicle.is_available,
        "current_location": vehicle.current_location,
        "created_at": vehicle.created_at,
        "updated_at": vehicle.updated_at,
    }


def booking_to_dict(booking):
    return {
        "id": booking.id,
        "user": booking.account.principal,
        "vehicle_id": booking.vehicle_id,
        "status": booking.status,
        "date_time": booking.date_time,
        "pickup_location": booking.pickup_location,
        "destination": booking.destination,
        "vehicle_no": booking.vehicle_no,
        "customer_name": booking.customer_name,
        "customer_no": booking.customer_no,
        "starting_km": booking.starting_km,
        "ending_km": booking.ending_km,
        "rate_per_km": booking.rate_per_km,
        "toll_tax": booking.toll_tax,
        "diesel_or_gas_by_customer": booking.diesel_or_gas_by_customer,
        "total_km": booking.total_km,
        "total_amount": booking.total_amount,
        "net_amount": booking.net_amount,
        "created_at": booking.created_at,
        "updated_at": booking.updated_at,
    }
