from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from review_dashboard.core.deps import get_dataset
from review_dashboard.schemas.dataset import Dataset, PropertyDetailResponse
from review_dashboard.schemas.property import BookingQuote, Property
from review_dashboard.schemas.review import Review
from review_dashboard.services import property_service

router = APIRouter()


@router.get("/", response_model=List[Property])
def list_properties(dataset: Dataset = Depends(get_dataset)):
    """Get all properties"""
    return dataset.properties


@router.get("/{property_id}", response_model=PropertyDetailResponse)
def get_property(property_id: int, dataset: Dataset = Depends(get_dataset)):
    """Public property page: details, price and approved reviews"""
    return property_service.get_property_detail(dataset, property_id)


@router.get("/{property_id}/reviews", response_model=List[Review])
def list_property_reviews(property_id: int, dataset: Dataset = Depends(get_dataset)):
    """Approved reviews for a property"""
    property_service.find_property(dataset, property_id)
    return property_service.public_reviews(dataset, property_id)


@router.get("/{property_id}/quote", response_model=BookingQuote)
def quote_booking(
    property_id: int,
    check_in: date = Query(..., alias="checkIn"),
    check_out: date = Query(..., alias="checkOut"),
    dataset: Dataset = Depends(get_dataset),
):
    """Price a stay at the property's nightly rate"""
    return property_service.quote_for_property(dataset, property_id, check_in, check_out)
